"""TapNTrack attendance service package.

This package is organized by feature modules (users, tracks, attendance, ...)
with a thin Flask controller layer on top of service/repository layers that
talk to an injected document store.
"""
