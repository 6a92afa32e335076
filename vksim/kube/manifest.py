# vksim/kube/manifest.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import yaml
from kubernetes import client


def _container_from_dict(c: Dict[str, Any]) -> client.V1Container:
    res = c.get("resources") or {}
    return client.V1Container(
        name=c.get("name"),
        image=c.get("image"),
        resources=client.V1ResourceRequirements(
            requests=res.get("requests"),
            limits=res.get("limits"),
        ),
    )


def pod_from_manifest(data: Dict[str, Any]) -> client.V1Pod:
    """kubectl-style pod dict (as in `kubectl get pod -o json`) -> V1Pod."""
    meta = data.get("metadata") or {}
    spec = data.get("spec") or {}
    return client.V1Pod(
        api_version=data.get("apiVersion", "v1"),
        kind=data.get("kind", "Pod"),
        metadata=client.V1ObjectMeta(
            name=meta.get("name"),
            namespace=meta.get("namespace", "default"),
            labels=meta.get("labels"),
            annotations=meta.get("annotations"),
            uid=meta.get("uid"),
        ),
        spec=client.V1PodSpec(
            containers=[_container_from_dict(c) for c in spec.get("containers") or []],
            node_name=spec.get("nodeName"),
        ),
    )


def load_manifests(path: Union[str, Path]) -> List[client.V1Pod]:
    """
    Reads pods from a YAML/JSON file.

    Accepts several documents separated by `---` and `kind: List` wrappers;
    documents of other kinds are skipped.
    """
    pods: List[client.V1Pod] = []
    with open(path, "r", encoding="utf-8") as f:
        for doc in yaml.safe_load_all(f):
            if not isinstance(doc, dict):
                continue
            items = doc.get("items", []) if doc.get("kind") == "List" else [doc]
            for item in items:
                if item.get("kind", "Pod") == "Pod":
                    pods.append(pod_from_manifest(item))
    return pods


def container_names(pod: Any) -> Sequence[str]:
    spec = getattr(pod, "spec", None)
    if spec is None or not spec.containers:
        return []
    return [c.name for c in spec.containers]
