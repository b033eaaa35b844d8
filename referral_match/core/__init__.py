"""
Core business logic for the referral matching service.

Submodules:
- matching: Referral-to-opening matching engine
- ranking: Prominence ranking applied after matching
"""
