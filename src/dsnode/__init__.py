"""Stdio nodes for distributed-systems test harnesses."""
