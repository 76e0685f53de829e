"""Resolve endpoints once and print them as JSON.

    python -m kube_discovery --namespace hz --label-name app --label-value hazelcast

Flags override KUBE_DISCOVERY_* environment variables. Exit status 1 means the
endpoints could not be determined; an empty array is a successful answer.
"""

from __future__ import annotations

import argparse
import json
import sys

from kube_discovery.tier0_core.config import DiscoverySettings, load_settings
from kube_discovery.tier0_core.errors import DiscoveryError
from kube_discovery.tier0_core.logging import configure_logging, get_logger
from kube_discovery.tier2_platform.strategy import KubernetesDiscoveryStrategy

log = get_logger("kube_discovery.cli")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kube_discovery",
        description="List discovery nodes from Kubernetes endpoints.",
    )
    parser.add_argument("--namespace", help="namespace to query")
    parser.add_argument("--service-name", help="accepted for compatibility, not used for filtering")
    parser.add_argument("--label-name", help="service label key")
    parser.add_argument("--label-value", help="service label value")
    parser.add_argument("--master", help="Kubernetes API base URL")
    parser.add_argument("--token-file", help="file holding the bearer token")
    parser.add_argument("--insecure", action="store_true", help="skip TLS verification")
    return parser.parse_args(argv)


def _settings_from_args(args: argparse.Namespace) -> DiscoverySettings:
    overrides = {
        "namespace": args.namespace,
        "service_name": args.service_name,
        "service_label_name": args.label_name,
        "service_label_value": args.label_value,
        "kubernetes_master": args.master,
        "api_token_file": args.token_file,
    }
    if args.insecure:
        overrides["verify_ssl"] = False
    settings = load_settings(**{k: v for k, v in overrides.items() if v is not None})
    if args.token_file is not None:
        # --token-file beats KUBE_DISCOVERY_API_TOKEN
        settings = settings.model_copy(update={"api_token": None})
    return settings


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = _settings_from_args(args)
        configure_logging(settings.log_level, settings.log_format)
        with KubernetesDiscoveryStrategy(settings) as strategy:
            nodes = strategy.discover_nodes()
    except DiscoveryError as exc:
        log.error("discovery.failed", code=exc.code, detail=exc.detail)
        print(exc.user_message, file=sys.stderr)
        return 1

    json.dump(
        [{"host": n.private_address.host, "port": n.private_address.port} for n in nodes],
        sys.stdout,
    )
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
