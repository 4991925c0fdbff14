"""Accuracy benchmarking against labelled transcripts."""
