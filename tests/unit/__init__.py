"""
Unit tests for the Content Gateway.

Test individual components in isolation:
- Retry policy and resilient client (MockTransport upstreams, fake sleep)
- Cache backends, tier selection and cache-aside fetching
- Document rendering and format conversion (RTF transpiler in depth)
- Upstream clients, record service and API routes
"""
