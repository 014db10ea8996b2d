import re
from pathlib import Path

EXPECTED_VARS = [
    "ADMIN_USER_IDS", "AI_PICKS_WRITER", "ANTHROPIC_API_KEY",
    "API_V1_PREFIX", "APP_DEBUG", "APP_ENV", "APP_NAME",
    "AUTH_JWT_ALGORITHM", "AUTH_JWT_ISSUER", "AUTH_JWT_SECRET",
    "CORS_ORIGINS", "DATABASE_URL", "DB_MAX_OVERFLOW", "DB_POOL_SIZE",
    "LOG_LEVEL", "ODDS_API_BASE", "ODDS_API_KEY",
    "STRIPE_SECRET_KEY", "STRIPE_WEBHOOK_SECRET",
]


def find_env_vars(root: str = "hoopspicks"):
    """Find all environment variables referenced in code or settings aliases."""
    env_vars = set()
    for py_file in Path(root).rglob("*.py"):
        content = py_file.read_text(encoding="utf-8", errors="ignore")
        env_vars.update(re.findall(r'os\.getenv\(["\']([A-Z0-9_]+)["\']', content))
        env_vars.update(re.findall(r'os\.environ\[\s*["\']([A-Z0-9_]+)["\']\s*\]', content))
        env_vars.update(re.findall(r'alias=["\']([A-Z0-9_]+)["\']', content))
    return sorted(env_vars)


def verify():
    code_vars = set(find_env_vars())
    expected = set(EXPECTED_VARS)
    missing = sorted(code_vars - expected)
    unused = sorted(expected - code_vars)

    print("=== ENV VAR VERIFICATION ===")
    print(f"Code references: {len(code_vars)} unique vars")
    print(f"Expected list has: {len(expected)} vars")
    print("")
    if missing:
        print(f"NOT IN EXPECTED LIST ({len(missing)}):")
        for v in missing:
            print(f"  - {v}")
    else:
        print("Every referenced var is in the expected list.")
    print("")
    if unused:
        print(f"UNUSED IN CODE ({len(unused)}):")
        for v in unused:
            print(f"  - {v}")
    else:
        print("No unused expected vars.")


if __name__ == "__main__":
    verify()
