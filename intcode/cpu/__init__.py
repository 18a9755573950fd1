"""Instruction decoding and arithmetic helpers."""
