"""Test suite for the card key activation service."""
