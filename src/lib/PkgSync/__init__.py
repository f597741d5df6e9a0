"""PkgSync reconciles FreeBSD pkg(8) package state with a declared
configuration."""
