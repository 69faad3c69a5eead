"""Clock Sync package.

This package is organized by feature modules (clock, attendance, otp, ...)
with a thin Flask controller layer over service and data-source layers.
"""
