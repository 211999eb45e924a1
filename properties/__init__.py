"""
Properties app for the Roovia portal.

Property owners, rental properties and their tenants, scoped per company.
"""
