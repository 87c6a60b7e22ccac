import base64

import httpx
import pytest

from central_publisher.exceptions import InvalidCredentialsError, RegistryApiError
from central_publisher.modules.bundle.domain import PublicationCoordinates
from central_publisher.modules.deployment.client import CentralPortalClient
from central_publisher.modules.deployment.domain import DeploymentState, PublishingType
from central_publisher.settings import Settings

BASE_URL = "https://central.example.test/api/v1/publisher"


def build_settings(tmp_path, **overrides) -> Settings:
    defaults = {
        "central_base_url": BASE_URL,
        "central_username": "user",
        "central_password": "secret",
        "publish_work_dir": str(tmp_path / "work"),
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def build_client(tmp_path, handler, **overrides) -> CentralPortalClient:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return CentralPortalClient(build_settings(tmp_path, **overrides), client=client)


def _archive(tmp_path):
    archive = tmp_path / "upload.zip"
    archive.write_bytes(b"PK-zip-bytes")
    return archive


def test_upload_sends_bearer_token_and_multipart_bundle(tmp_path):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers["Authorization"]
        seen["content_type"] = request.headers["Content-Type"]
        seen["body"] = request.read()
        return httpx.Response(201, text="28570f16-da32-4c14-bd2e-c1acc0782365\n")

    portal = build_client(tmp_path, handler)
    coords = PublicationCoordinates("com.example", "my-lib", "1.0")

    deployment_id = portal.upload_bundle(_archive(tmp_path), PublishingType.USER_MANAGED, coords)

    assert deployment_id == "28570f16-da32-4c14-bd2e-c1acc0782365"
    assert seen["method"] == "POST"
    assert seen["path"] == "/api/v1/publisher/upload"
    assert seen["params"] == {"publishingType": "USER_MANAGED", "name": "com.example:my-lib:1.0"}
    expected = base64.b64encode(b"user:secret").decode("ascii")
    assert seen["auth"] == f"Bearer {expected}"
    assert seen["content_type"].startswith("multipart/form-data")
    assert b'name="bundle"' in seen["body"]
    assert b'filename="upload.zip"' in seen["body"]
    assert b"PK-zip-bytes" in seen["body"]


def test_upload_with_empty_body_fails(tmp_path):
    portal = build_client(tmp_path, lambda request: httpx.Response(201, text="  "))

    with pytest.raises(RegistryApiError, match="empty body"):
        portal.upload_bundle(_archive(tmp_path), PublishingType.AUTOMATIC, PublicationCoordinates("g", "a", "1"))


def test_upload_payload_too_large(tmp_path):
    portal = build_client(tmp_path, lambda request: httpx.Response(413, text="too big"))

    with pytest.raises(RegistryApiError, match="Payload too large") as excinfo:
        portal.upload_bundle(_archive(tmp_path), PublishingType.AUTOMATIC, PublicationCoordinates("g", "a", "1"))

    assert excinfo.value.status_code == 413


@pytest.mark.parametrize(
    "overrides",
    [{"central_username": ""}, {"central_password": "   "}, {"central_username": None}],
)
def test_blank_credentials_never_reach_the_server(tmp_path, overrides):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    portal = build_client(tmp_path, handler, **overrides)

    with pytest.raises(InvalidCredentialsError):
        portal.drop_deployment("dep-1")
    assert calls == []


def test_status_is_decoded(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/v1/publisher/status"
        assert request.url.params["id"] == "dep-1"
        assert request.headers["Content-Type"] == "application/json"
        return httpx.Response(
            200,
            json={
                "deploymentId": "dep-1",
                "deploymentName": "com.example:my-lib:1.0",
                "deploymentState": "VALIDATED",
                "purls": ["pkg:maven/com.example/my-lib@1.0"],
            },
        )

    status = build_client(tmp_path, handler).get_deployment_status("dep-1")

    assert status.deployment_id == "dep-1"
    assert status.deployment_state is DeploymentState.VALIDATED
    assert status.is_validated
    assert status.purls == ["pkg:maven/com.example/my-lib@1.0"]


def test_status_not_found_returns_none(tmp_path):
    portal = build_client(tmp_path, lambda request: httpx.Response(404))

    assert portal.get_deployment_status("gone") is None


def test_status_with_unreadable_body(tmp_path):
    portal = build_client(tmp_path, lambda request: httpx.Response(200, json={"unexpected": True}))

    with pytest.raises(RegistryApiError, match="unable to read returned status"):
        portal.get_deployment_status("dep-1")


def test_json_error_body_is_decoded(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"httpStatus": 400, "errorCode": "INVALID", "message": "Deployment not in VALIDATED state"},
        )

    with pytest.raises(RegistryApiError) as excinfo:
        build_client(tmp_path, handler).publish_deployment("dep-1")

    error = excinfo.value
    assert error.status_code == 400
    assert error.deployment_id == "dep-1"
    assert error.error.error_code == "INVALID"
    assert "Deployment not in VALIDATED state" in str(error)
    assert str(error).startswith("Publish of deployment dep-1 failed")


def test_nested_json_error_body(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Invalid token"}})

    with pytest.raises(RegistryApiError) as excinfo:
        build_client(tmp_path, handler).drop_deployment("dep-1")

    assert excinfo.value.error.message == "Invalid token"
    assert excinfo.value.error.http_status == 401


def test_non_json_error_reports_status_code(tmp_path):
    portal = build_client(tmp_path, lambda request: httpx.Response(503, text="<html>down</html>"))

    with pytest.raises(RegistryApiError, match="HTTP code 503") as excinfo:
        portal.drop_deployment("dep-1")

    assert excinfo.value.error is None


def test_publish_and_drop_target_the_deployment_resource(tmp_path):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append((request.method, request.url.path))
        return httpx.Response(204)

    portal = build_client(tmp_path, handler)
    portal.publish_deployment("dep-1")
    portal.drop_deployment("dep-2")

    assert requests == [
        ("POST", "/api/v1/publisher/deployment/dep-1"),
        ("DELETE", "/api/v1/publisher/deployment/dep-2"),
    ]


def test_transport_failure_is_wrapped(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RegistryApiError, match="connection refused"):
        build_client(tmp_path, handler).drop_deployment("dep-1")


def test_non_numeric_http_status_in_error_body(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"httpStatus": "CONFLICT", "errorCode": "STATE", "message": "busy"})

    with pytest.raises(RegistryApiError) as excinfo:
        build_client(tmp_path, handler).publish_deployment("dep-1")

    assert excinfo.value.status_code == 409
    assert excinfo.value.error.http_status == 409
    assert "busy" in str(excinfo.value)
