"""Turnstile System package.

Organized by feature modules (punches, users) with a thin Flask controller
layer on top of service/repository layers. The punch reconciliation engine
(``punches.pairing`` and ``punches.reconciliation``) is pure and does no I/O.
"""
