"""Pilot journey log: flight-log sheet core, storage and exporters."""
