"""Audit trail for commands run on the remote host."""
