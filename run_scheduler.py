"""
Main Execution Script for the Clinical Staffing Scheduler.

Loads a one-day snapshot (roster, teams, appointments, pending requests),
validates the pending requests, reports break coverage, auto-schedules the
missing breaks and writes the drafts out for the bulk-create command.

Usage: python run_scheduler.py [snapshot.json] [drafts_out.json] [policy.json]
"""

import os
import sys
import logging
import json
from datetime import date

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from models import Appointment, AppointmentRequest, StaffMember, Team
from scheduler.coverage import TeamCoverageValidator
from scheduler.engine import BreakAutoScheduler
from scheduler.policy import DEFAULT_POLICY, load_policy
from scheduler.validator import AppointmentValidator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")

# --- CONFIGURATION ---
SNAPSHOT_FILENAME = "sample_day.json"
DRAFTS_FILENAME = "break_drafts.json"
# ---------------------


def load_snapshot(filename: str):
    """
    Helper to load a JSON day snapshot and reconstruct Pydantic objects.
    """
    try:
        with open(filename, 'r') as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error(f"❌ Snapshot {filename} not found or invalid: {e}")
        return None

    logger.info(f"📂 Loading snapshot from {filename}...")

    # Re-hydrate Pydantic models from the JSON dicts
    snapshot = {
        "date": date.fromisoformat(data["date"]),
        "location_id": data.get("location_id"),
        "staff": [StaffMember(**item) for item in data.get('staff', [])],
        "teams": [Team(**item) for item in data.get('teams', [])],
        "appointments": [Appointment(**item) for item in data.get('appointments', [])],
        "requests": [AppointmentRequest(**item) for item in data.get('requests', [])],
    }

    logger.info(
        f"✅ Snapshot Loaded: {len(snapshot['staff'])} staff, "
        f"{len(snapshot['appointments'])} appointments, {len(snapshot['requests'])} pending requests."
    )
    return snapshot


def export_drafts(state, filename: str):
    """Serialize break drafts and failures for the bulk-create command."""
    data = {
        "date": state.day.isoformat(),
        "breaks": [d.model_dump(mode='json') for d in state.drafts],
        "errors": [f.model_dump(mode='json') for f in state.failures],
    }
    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info(f"💾 Exported {len(state.drafts)} break drafts to {filename}")


def main():
    snapshot_file = sys.argv[1] if len(sys.argv) > 1 else SNAPSHOT_FILENAME
    drafts_file = sys.argv[2] if len(sys.argv) > 2 else DRAFTS_FILENAME
    policy = load_policy(sys.argv[3]) if len(sys.argv) > 3 else DEFAULT_POLICY

    snapshot = load_snapshot(snapshot_file)
    if not snapshot:
        logger.error("❌ No data available. Exiting.")
        return

    # --- PHASE 1: VALIDATE PENDING REQUESTS ---
    logger.info("--- Phase 1: Appointment Validation ---")
    validator = AppointmentValidator(policy)
    for request in snapshot["requests"]:
        result = validator.validate(request, snapshot["appointments"])
        status = "✅ OK" if result.is_valid else "❌ REJECTED"
        print(f"{status} request {request.id or '<new>'} ({request.start_time} - {request.end_time})")
        for error in result.errors:
            print(f"   ❌ {error.message}")
        for warning in result.warnings:
            print(f"   ⚠️ {warning.message}")

    # --- PHASE 2: TEAM COVERAGE ---
    logger.info("--- Phase 2: Team Break Coverage ---")
    team_validator = TeamCoverageValidator(policy)
    for team in snapshot["teams"]:
        report = team_validator.validate(team, snapshot["appointments"], snapshot["date"], snapshot["staff"])
        print(
            f"👥 {team.name or team.id}: {report.staff_with_break}/{report.staff_needing_break} "
            f"staff needing a break have one"
        )
        for warning in report.warnings:
            print(f"   ⚠️ {warning.message}")

    # --- PHASE 3: AUTO-SCHEDULE BREAKS ---
    logger.info("--- Phase 3: Break Auto-Scheduler ---")
    scheduler = BreakAutoScheduler(
        staff=snapshot["staff"],
        appointments=snapshot["appointments"],
        day=snapshot["date"],
        teams=snapshot["teams"],
        location_id=snapshot["location_id"],
        policy=policy
    )
    final_state = scheduler.run()

    stats = final_state.get_statistics()
    print("\n" + "=" * 50)
    print("📊 BREAK COVERAGE REPORT")
    print("=" * 50)
    print(stats)

    for draft in final_state.drafts:
        print(f"🍽️ {draft.staff_name}: {draft.slot_label} (score {draft.score:g})")

    if final_state.failures:
        print("\n🔍 UNSCHEDULED BREAKS")
        for fail in final_state.get_failure_report():
            print(f"❌ {fail['staff_name']} ({fail['working_hours']}h): {fail['reason']}")

    # --- PHASE 4: EXPORT ---
    export_drafts(final_state, drafts_file)


if __name__ == "__main__":
    main()
