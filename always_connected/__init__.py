"""Backend for the Always Connected notifier.

The package re-exports nothing; layers are imported from their own modules.
"""
