"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Issue lifecycle, voting, permissions, user accounts and
dashboard aggregation. Services call repositories and raise the errors
defined in ``app.utils.exceptions``.
"""
