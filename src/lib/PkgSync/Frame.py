""" Frame applies a configuration of ``Package`` entries with a
package provider, and reports on the result. """

import logging
import PkgSync.Options
from PkgSync.Providers import ProviderError, INSTALL, UPDATE, UNINSTALL


class Frame(object):
    """ Frame is the framework that brings every ``Package`` entry of
    a configuration into its desired state. """

    options = [
        PkgSync.Options.Option(
            '-b', '--only-bundles', default=[],
            type=PkgSync.Options.Types.colon_list,
            help='Only apply the given colon-separated set of bundles')]

    def __init__(self, setup, config, provider=None):
        """
        :param setup: The option set PkgSync was invoked with
        :type setup: argparse.Namespace
        :param config: The configuration document root
        :type config: lxml.etree._Element
        :param provider: The provider to use.  By default, the
                         provider selected with ``--provider`` is
                         instantiated.
        :type provider: PkgSync.Providers.Provider
        """
        self.setup = setup
        self.config = config
        self.logger = logging.getLogger(__name__)
        if provider is None:
            provider = setup.provider(setup)
        self.provider = provider

        #: A dict of entry -> bool; True if the entry is in its
        #: desired state
        self.states = dict()

        #: A list of entries that were changed
        self.modified = []

    @property
    def dryrun(self):
        """ True if nothing should be changed """
        return getattr(self.setup, 'dryrun', False)

    def bundles(self):
        """ Get the bundles to apply, honoring ``--only-bundles`` """
        only = getattr(self.setup, 'only_bundles', None)
        bundles = self.config.findall('./Bundle')
        if only:
            bundles = [b for b in bundles if b.get('name') in only]
        return bundles

    def entries(self):
        """ Get all entries that the provider can install """
        return [entry for bundle in self.bundles()
                for entry in bundle.findall('./Package')
                if self.provider.canInstall(entry)]

    def _describe(self, action, entry):
        """ Log what would be done to the entry """
        key = self.provider.primarykey(entry)
        if action is None:
            self.logger.info("%s is in sync" % key)
        elif action == UPDATE:
            self.logger.info("Would upgrade %s" % key)
        elif action == UNINSTALL:
            self.logger.info("Would remove %s" % key)
        elif action == INSTALL:
            self.logger.info("Would install %s" % key)

    def apply(self, entry):
        """ Bring a single entry into its desired state, recording the
        result in :attr:`states` and :attr:`modified`. """
        try:
            if self.dryrun:
                action = self.provider.get_action(entry)[0]
                self._describe(action, entry)
                self.states[entry] = action is None
            else:
                if self.provider.sync(entry):
                    self.modified.append(entry)
                self.states[entry] = True
        except ProviderError as err:
            self.logger.error("Failed to apply %s: %s" %
                              (self.provider.primarykey(entry), err))
            self.states[entry] = False

    def run(self):
        """ Apply every entry.

        :returns: bool - True if every entry is in its desired state
        """
        for entry in self.entries():
            self.apply(entry)
        self.display_state()
        return all(self.states.values())

    def display_state(self):
        """ Log a summary of the run """
        values = list(self.states.values())
        self.logger.info('Correct entries:        %d' % values.count(True))
        self.logger.info('Incorrect entries:      %d' % values.count(False))
        if self.modified:
            self.logger.info('Modified entries:')
            self.logger.info([self.provider.primarykey(e)
                              for e in self.modified])
        for entry in sorted(self.states.keys(),
                            key=lambda e: e.get('name')):
            if not self.states[entry]:
                self.logger.info("Incorrect: %s" %
                                 self.provider.primarykey(entry))
        self.logger.info('Total managed entries: %d' % len(values))
        if not values.count(False):
            self.logger.info('All entries correct.')
