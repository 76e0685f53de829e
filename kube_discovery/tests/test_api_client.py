"""Tests for KubernetesClient over httpx.MockTransport."""
from __future__ import annotations

import httpx
import pytest
from pydantic import SecretStr

from kube_discovery.tier0_core.errors import AuthError, ForbiddenError, UpstreamError
from kube_discovery.tier0_core.secrets import FileTokenProvider
from kube_discovery.tier2_platform.api_client import EndpointsApi, KubernetesClient
from kube_discovery.tier2_platform.discovery import SelectionCriteria, ServiceEndpointResolver
from kube_discovery.tier2_platform.models import SERVICE_PORT_KEY

MASTER = "https://k8s.example:6443"

ENDPOINTS_LIST = {
    "kind": "EndpointsList",
    "apiVersion": "v1",
    "items": [
        {
            "metadata": {"name": "hazelcast", "namespace": "hz"},
            "subsets": [
                {
                    "addresses": [
                        {"ip": "10.1.0.4", "nodeName": "n1", SERVICE_PORT_KEY: "5701"},
                        {"ip": "10.1.0.5", "targetRef": {"kind": "Pod", "name": "hz-1"}},
                    ],
                    "ports": [{"name": SERVICE_PORT_KEY, "port": 5702, "protocol": "TCP"}],
                }
            ],
        },
        {"metadata": {"name": "starting"}, "subsets": None},
        {"metadata": {"name": "unready"}, "subsets": [{"notReadyAddresses": [{"ip": "10.1.0.9"}]}]},
    ],
}


def _client(handler, token="s3cr3t") -> KubernetesClient:
    return KubernetesClient(MASTER, token, transport=httpx.MockTransport(handler))


class TestListEndpoints:
    def test_namespace_request(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": []})

        with _client(handler) as client:
            result = client.list_endpoints("hz")

        assert result.items == []
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/api/v1/namespaces/hz/endpoints"
        assert "labelSelector" not in request.url.params
        assert request.headers["Authorization"] == "Bearer s3cr3t"
        assert request.headers["Accept"] == "application/json"

    def test_label_selector_request(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=ENDPOINTS_LIST)

        with _client(handler) as client:
            result = client.list_endpoints("hz", label=("app", "hazelcast"))

        assert seen[0].url.params["labelSelector"] == "app=hazelcast"
        assert [item.metadata.name for item in result.items] == ["hazelcast", "starting", "unready"]
        assert result.items[1].subsets == []

    def test_satisfies_resolver_protocol(self):
        client = _client(lambda request: httpx.Response(200, json={}))
        assert isinstance(client, EndpointsApi)
        client.close()

    def test_token_is_reread_from_file(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("first\n", encoding="utf-8")
        headers = []

        def handler(request: httpx.Request) -> httpx.Response:
            headers.append(request.headers["Authorization"])
            return httpx.Response(200, json={"items": []})

        with _client(handler, token=FileTokenProvider(str(token_file))) as client:
            client.list_endpoints("hz")
            token_file.write_text("second\n", encoding="utf-8")
            client.list_endpoints("hz")

        assert headers == ["Bearer first", "Bearer second"]


class TestErrorMapping:
    def test_401_raises_auth_error(self):
        client = _client(lambda request: httpx.Response(401, json={"reason": "Unauthorized"}))
        with pytest.raises(AuthError):
            client.list_endpoints("hz")

    def test_403_raises_forbidden(self):
        client = _client(lambda request: httpx.Response(403, text="forbidden"))
        with pytest.raises(ForbiddenError):
            client.list_endpoints("hz")

    def test_server_error_carries_status(self):
        client = _client(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(UpstreamError) as exc_info:
            client.list_endpoints("hz")
        assert exc_info.value.upstream_status == 503

    def test_connection_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            _client(handler).list_endpoints("hz")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_non_json_body(self):
        client = _client(lambda request: httpx.Response(200, text="<html>proxy</html>"))
        with pytest.raises(UpstreamError) as exc_info:
            client.list_endpoints("hz")
        assert exc_info.value.code == "invalid_response"

    def test_wrong_schema(self):
        client = _client(lambda request: httpx.Response(200, json={"items": "nope"}))
        with pytest.raises(UpstreamError) as exc_info:
            client.list_endpoints("hz")
        assert exc_info.value.code == "invalid_response"
        assert "items" in exc_info.value.metadata["fields"]

    def test_token_not_in_error_detail(self):
        client = _client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(UpstreamError) as exc_info:
            client.list_endpoints("hz")
        assert "s3cr3t" not in str(exc_info.value)


class TestResolverOverHttp:
    def test_resolves_ready_addresses(self):
        client = _client(lambda request: httpx.Response(200, json=ENDPOINTS_LIST))
        criteria = SelectionCriteria(namespace="hz", kubernetes_master=MASTER, api_token=SecretStr("s3cr3t"))

        nodes = ServiceEndpointResolver(criteria, client).resolve()

        assert [str(n.private_address) for n in nodes] == ["10.1.0.4:5701", "10.1.0.5:5702"]
