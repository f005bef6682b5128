#!/usr/bin/env python3
"""
Migration runner.

Runs every deploy/migrate_*.py script in name order, each in its own
subprocess. Migrations are idempotent. --reset-db drops the Sift tables and
rebuilds them with init_db.py first.
"""
import argparse
import asyncio
import os
import subprocess
import sys
from pathlib import Path

from sqlalchemy.ext.asyncio import create_async_engine

DEPLOY_DIR = Path(__file__).parent
PROJECT_ROOT = DEPLOY_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app.config import ENV_FILE_PATHS, find_env_file, read_env_file
from app.models import Base


def load_env_file():
    """Variables from the first .env file found, or an empty dict."""
    env_file = find_env_file(ENV_FILE_PATHS)
    if env_file is None:
        print("No .env file found, using the inherited environment")
        return {}
    print(f"Loading environment variables from {env_file}")
    return read_env_file(env_file)


def find_migration_scripts():
    return sorted(DEPLOY_DIR.glob("migrate_*.py"))


async def reset_database(database_url: str) -> None:
    """Drop all feedback tables so the schema can be rebuilt from scratch."""
    print("Dropping Sift tables...")
    engine = create_async_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    finally:
        await engine.dispose()
    print("✓ Tables dropped")


def _build_script_command(script_path: Path, env: dict) -> tuple[list[str], dict]:
    # Prefer the project's virtualenv when deployed with one
    venv_python = PROJECT_ROOT / ".venv" / "bin" / "python"
    interpreter = str(venv_python) if venv_python.exists() else sys.executable
    return [interpreter, str(script_path)], env


def _run_script(script_path: Path, env: dict) -> subprocess.CompletedProcess:
    cmd, subprocess_env = _build_script_command(script_path, env)
    result = subprocess.run(
        cmd,
        cwd=str(PROJECT_ROOT),
        env=subprocess_env,
        capture_output=True,
        text=True,
    )
    if result.stdout:
        print(result.stdout)
    if result.stderr:
        print(result.stderr, file=sys.stderr)
    return result


async def run_migration(script_path: Path, env: dict) -> bool:
    """Run one migration script; True when it exits cleanly."""
    print(f"\n--- {script_path.name} ---")
    if not env.get("DATABASE_URL"):
        print("WARNING: DATABASE_URL is not set, the script will use its default")

    result = _run_script(script_path, env)
    if result.returncode != 0:
        print(f"❌ {script_path.name} failed (exit code {result.returncode})")
        return False
    print(f"✅ {script_path.name} done")
    return True


async def main(reset_db: bool = False):
    """Run all migrations, returning a process exit code."""
    migrations = find_migration_scripts()
    if not migrations:
        print("No migrate_*.py scripts in deploy/")
        return 0
    print(f"Migrations: {', '.join(m.name for m in migrations)}")

    # .env values win over the inherited environment
    env = {**os.environ, **load_env_file(), "PYTHONPATH": str(PROJECT_ROOT)}

    if reset_db:
        database_url = env.get("DATABASE_URL")
        if not database_url:
            print("ERROR: --reset-db needs DATABASE_URL")
            return 1
        await reset_database(database_url)
        if _run_script(DEPLOY_DIR / "init_db.py", env).returncode != 0:
            print("❌ init_db.py failed")
            return 1

    failed = [m.name for m in migrations if not await run_migration(m, env)]
    if failed:
        print(f"❌ Failed: {', '.join(failed)}")
        return 1
    print(f"✅ {len(migrations)} migration(s) applied")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run database migrations for Sift")
    parser.add_argument(
        "--reset-db",
        action="store_true",
        help="Drop and recreate the Sift tables before migrating (destructive)",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(main(reset_db=args.reset_db)))
