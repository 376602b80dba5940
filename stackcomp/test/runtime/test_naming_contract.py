"""The provisioning and runtime call sites must agree across processes.

Each side runs in its own interpreter with a different hash seed; the only
thing they share is the golden vector file.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

_DATA = Path(__file__).resolve().parents[1] / "data" / "naming_vectors.json"
_ROOT = Path(__file__).resolve().parents[3]

_PROVISIONING = """
import json, sys
from stackcomp.resolve.naming import normalize
vectors = json.load(open(sys.argv[1], encoding="utf-8"))["valid"]
print(json.dumps([normalize(v["stack_id"], v["logical_name"]).unwrap() for v in vectors]))
"""

_RUNTIME = """
import json, sys
from stackcomp.runtime.access import resource_name
vectors = json.load(open(sys.argv[1], encoding="utf-8"))["valid"]
print(json.dumps([
    resource_name(v["logical_name"], environ={"STACK_ID": v["stack_id"]}).unwrap()
    for v in vectors
]))
"""


def _run(code: str, seed: str) -> list[str]:
    env = dict(os.environ)
    env["PYTHONHASHSEED"] = seed
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(_ROOT), env.get("PYTHONPATH")]))
    proc = subprocess.run(
        [sys.executable, "-c", code, str(_DATA)],
        capture_output=True,
        text=True,
        env=env,
        check=True,
    )
    return json.loads(proc.stdout)


def test_separate_processes_derive_identical_ids() -> None:
    expected = [v["physical_id"] for v in json.loads(_DATA.read_text(encoding="utf-8"))["valid"]]
    assert _run(_PROVISIONING, "1") == expected
    assert _run(_RUNTIME, "2") == expected
