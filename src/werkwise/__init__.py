"""Werkwise package.

Feature modules (users, registrations, projects, inventory, agents, emails, ...)
each carry a thin Flask controller on top of service and repository layers.
"""
