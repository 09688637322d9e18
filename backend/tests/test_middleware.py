"""
Blog API Backend — Middleware Helper Tests
============================================

What:  Request-id acceptance and the pieces of the access-log line.
"""

import logging

import pytest
from starlette.routing import Route

from blog_api.middleware.logging import describe_target, level_for_status
from blog_api.middleware.request_id import resolve_request_id


class TestResolveRequestId:

    def test_client_token_is_kept(self):
        assert resolve_request_id("trace-42_a.b") == "trace-42_a.b"

    @pytest.mark.parametrize("incoming", [None, "", "a b", "evil\nline", "x" * 65])
    def test_unusable_values_are_replaced(self, incoming):
        rid = resolve_request_id(incoming)

        assert rid != incoming
        assert len(rid) == 8
        int(rid, 16)


class TestAccessLogPieces:

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (201, logging.INFO), (400, logging.WARNING),
         (404, logging.WARNING), (500, logging.ERROR), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    def test_routed_post_request(self):
        route = Route("/api/posts/{post_id}", endpoint=lambda request: None)
        scope = {"path": "/api/posts/7", "route": route, "path_params": {"post_id": "7"}}

        assert describe_target(scope) == {"route": "/api/posts/{post_id}", "post_id": "7"}

    def test_unrouted_request_falls_back_to_path(self):
        assert describe_target({"path": "/nowhere"}) == {"route": "/nowhere", "post_id": None}
