"""
Initialize database — creates the visitors table.
Run once before first launch, or after changing the model.
Usage: python scripts/setup/init_db.py [config.yaml]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect
from gatekeeper.config import load_settings
from gatekeeper.database import Gateway
from gatekeeper.exceptions import GatekeeperError


def main():
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.yaml"

    print("🗄️  Gatekeeper DB Initialization")
    print("=" * 40)
    try:
        settings = load_settings(config_path)
    except GatekeeperError as e:
        print(f"❌ {e.detail}")
        sys.exit(1)

    gateway = Gateway.from_settings(settings)
    print(f"📡 Database: {gateway.url.render_as_string(hide_password=True)}")

    # Test connection
    if not gateway.check_connection():
        print("❌ Cannot connect to database")
        print("\nMake sure MySQL is running and config.yaml points at it")
        sys.exit(1)
    print("✅ Database connection OK")

    print("\n📋 Creating tables...")
    gateway.create_tables()

    tables = inspect(gateway.engine).get_table_names()
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print("\n🎉 Database ready! You can now start the backend:")
    print("   python -m gatekeeper serve")


if __name__ == "__main__":
    main()
