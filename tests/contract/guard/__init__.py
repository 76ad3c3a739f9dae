"""Guard behavior against the reference interfaces."""
