"""Codecs used to turn cached values into bytes and back."""
