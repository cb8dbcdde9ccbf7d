"""
MailAudit core: data model, resolver and HTTP clients, configuration, audit orchestration.
"""
