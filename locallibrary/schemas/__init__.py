# Schemas package init
"""
Local Library: Form Schemas
============================

Pydantic models for the HTML form payloads accepted by create/update handlers.
"""
