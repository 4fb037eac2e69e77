"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Query layer for users and issues.
Repositories only build and run queries; they never commit. Transaction
boundaries belong to the routers.
"""
