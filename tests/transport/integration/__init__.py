"""Integration tests for the delivery client against a real HTTP server.

Tests in this directory start a back-end on a free localhost port and
exercise the network path end to end.
"""
