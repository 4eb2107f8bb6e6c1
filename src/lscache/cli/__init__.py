"""Command line interface for lscache."""
