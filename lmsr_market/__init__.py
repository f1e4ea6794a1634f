"""Binary prediction market priced by a fixed-point LMSR maker."""

__version__ = '0.1.0'
