"""
Service layer for bootunit.

- units: descriptor store and units file loader
- activation: process launcher, output sink, runner and scheduler
- logging: diagnostic logger implementations
"""
