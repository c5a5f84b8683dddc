"""School administration back office.

Feature modules (users, programs, branches, subjects, associations) each have
a thin Flask controller over a service and a repository protocol.
"""
