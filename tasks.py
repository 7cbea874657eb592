from pathlib import Path
from invoke import task
import shutil
import os
import json
from collections import Counter
from dotenv import load_dotenv


load_dotenv()


APP_NAME = "nexus-prune"
VERSION = os.getenv("VERSION", "0.1.0")
BUILD_DIR = Path(os.getenv("BUILD_DIR", "dist"))
BIN_NAME = APP_NAME
IMAGE = os.getenv("IMAGE", f"{APP_NAME}")


def _echo(ctx, cmd: str) -> None:
    ctx.run(cmd, echo=True)


def _analyze_bandit_report(report_path: Path) -> bool:
    """Print a summary of a Bandit JSON report. Returns True if no HIGH issue was found."""
    if not report_path.exists():
        print(f"⚠️ Bandit report not generated at {report_path}")
        return True
    with open(report_path, "r", encoding="utf-8") as f:
        results = json.load(f).get("results", [])
    if not results:
        print("   ✅ No security issues found!")
        return True

    severity_counts = Counter(r.get("issue_severity", "UNDEFINED") for r in results)
    print(f"   🔍 Total findings: {len(results)}")
    for severity in ["HIGH", "MEDIUM", "LOW"]:
        count = severity_counts.get(severity, 0)
        if count:
            print(f"   {severity.capitalize()}: {count}")

    test_counts = Counter(r.get("test_name", "unknown") for r in results)
    print("   📋 Top issues:")
    for test_name, count in test_counts.most_common(5):
        print(f"      • {test_name}: {count}")
    return severity_counts.get("HIGH", 0) == 0


@task
def clean(ctx):
    if BUILD_DIR.exists():
        shutil.rmtree(BUILD_DIR)


@task(help={"k": "Only run tests matching this expression"})
def test(ctx, k: str = ""):
    selector = f" -k '{k}'" if k else ""
    _echo(ctx, f"python3 -m pytest -q{selector}")


@task
def security_scan(ctx):
    """Run Bandit over the package and fail on HIGH severity findings."""
    reports_dir = BUILD_DIR / "security"
    reports_dir.mkdir(parents=True, exist_ok=True)
    report_path = reports_dir / "bandit.json"
    cwd = os.getcwd()
    ctx.run(
        f"docker run --rm -v '{cwd}:/src' ghcr.io/pycqa/bandit/bandit "
        f"-r -f json -o /src/{report_path} /src/nexus_prune",
        pty=True,
        warn=True,
    )
    print("\n📊 Bandit Security Analysis:")
    if not _analyze_bandit_report(report_path):
        raise SystemExit("Security scan failed - critical issues found!")
    print("✅ Security scan passed.")


@task(help={"distdir": "Output directory (default: dist)"})
def build_bin(ctx, distdir: str = "dist"):
    _echo(ctx, f"python3 -m PyInstaller -F -n {BIN_NAME} main.py --distpath {distdir}")


@task(help={"tag": "Tag for the image (default: VERSION)"})
def build_docker_image(ctx, tag: str = VERSION):
    _echo(ctx, f"docker build -t {IMAGE}:{tag} .")
