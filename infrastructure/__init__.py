"""
Infrastructure Package
======================

Adapters for the two external systems the marketplace depends on, behind
interfaces the domain services are written against.

Modules:
    - payments: Stripe products, prices, Connect accounts and checkout sessions
    - identity: Clerk user lookup and Svix-signed webhook verification
    - container: process-wide providers and the services built on them
"""
