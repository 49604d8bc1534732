"""Browsing, search and cascading filters over the TMF Reference Model."""
