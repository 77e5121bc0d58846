"""
Authorization Service package for the Access Layer.

Decides, for every inbound operation, whether the acting principal may
proceed: PERMIT, DENY or UNAUTHENTICATED. Two enforcement points share one
policy table and one decision engine:
- Route filter: HTTP verb + path pattern, before dispatch.
- Method interceptor: create/read/update/delete/list, before execution.

Structure:
- app.main: FastAPI app, resource routes, and middleware wiring.
- app.principal: Principal and role model.
- app.policy: Rule model, policy table, loader and decision engine.
- app.auth: Credential parsing, providers and the per-request security context.
- app.domain: Route filter and method interceptor.
- app.adapters: In-memory persistence collaborator.
"""
