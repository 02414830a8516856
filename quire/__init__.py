"""Quire - a small async page CMS."""
