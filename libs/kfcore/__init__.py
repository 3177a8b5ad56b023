"""Shared configuration, logging, errors, and audio I/O for the key finder libraries."""
