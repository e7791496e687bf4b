#!/usr/bin/env python3
"""Seed data script for CSR Project Tracker.

Generates fake CSR partners, projects and the records hanging off them
(tasks, budget allocations and utilizations, bills, calendar events,
media articles, utilization certificates) for development and testing.

Usage:
    python scripts/seed_data.py

The script is idempotent - it checks for existing projects and skips
seeding if data already exists. Use reset_db.py to clear and reseed.
"""
import random
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import create_app, db, get_store
from app.models import (
    BillStatus,
    CertificateStatus,
    EventStatus,
    EventType,
    MediaType,
    ProjectStatus,
    TaskStatus,
)
from app.services.aggregation import count_by

PARTNERS = [
    ("Tata Steel Foundation", "Jamshedpur", "Jharkhand"),
    ("Infosys Foundation", "Bengaluru", "Karnataka"),
    ("HDFC Parivartan", "Mumbai", "Maharashtra"),
    ("Mahindra Rise", "Pune", "Maharashtra"),
]

# (name, metadata prefix used for beneficiary figures)
PROJECT_THEMES = [
    ("Menstrual Hygiene Awareness", "pads_donated"),
    ("Mid-day Meal Support", "meals_distributed"),
    ("Digital Literacy Centres", "students_enrolled"),
    ("Urban Afforestation Drive", "trees_planted"),
    ("Government School Renovation", "schools_renovated"),
]

BUDGET_HEADS = ["Materials", "Training", "Logistics", "Staff", "Monitoring"]
MONTHS = ["April", "May", "June", "July", "August", "September"]
QUARTERS = {"April": "Q1", "May": "Q1", "June": "Q1",
            "July": "Q2", "August": "Q2", "September": "Q2"}
VENDORS = ["Sharma Traders", "Green Earth Nursery", "Vidya Books", "City Logistics"]
NEWS_CHANNELS = ["Times of India", "Dainik Bhaskar", "NDTV", "The Hindu"]
FISCAL_YEAR = "2024-25"


def create_partners(store) -> list[dict]:
    rows = [
        {"company_name": name, "city": city, "state": state, "is_active": True}
        for name, city, state in PARTNERS
    ]
    return store.insert("csr_partners", rows)


def create_projects(store, partners: list[dict], rng: random.Random) -> list[dict]:
    """Create one project per theme per partner with beneficiary metadata."""
    today = date.today()
    statuses = [ProjectStatus.ACTIVE, ProjectStatus.ACTIVE, ProjectStatus.COMPLETED,
                ProjectStatus.PLANNING, ProjectStatus.ON_HOLD, ProjectStatus.UPCOMING]
    rows = []
    counter = 1
    for partner in partners:
        for theme, prefix in PROJECT_THEMES:
            total = rng.randrange(10, 60) * 100000
            utilized = total * rng.randint(0, 90) / 100
            target = rng.randrange(500, 5000, 100)
            start = today - timedelta(days=rng.randint(30, 200))
            rows.append({
                "project_code": f"PRJ-{counter:03d}",
                "name": f"{theme} - {partner['city']}",
                "description": f"{theme} programme funded by {partner['company_name']}",
                "csr_partner_id": partner["id"],
                "status": rng.choice(statuses),
                "start_date": start.isoformat(),
                "expected_end_date": (start + timedelta(days=rng.randint(60, 365))).isoformat(),
                "total_budget": total,
                "utilized_budget": utilized,
                "completion_percentage": round(utilized / total * 100, 1),
                "metadata": {
                    "beneficiaries_target": target,
                    "beneficiaries_current": rng.randint(0, target),
                    f"{prefix}_target": target * 2,
                    f"{prefix}_current": rng.randint(0, target * 2),
                },
            })
            counter += 1
    return store.insert("projects", rows)


def create_project_records(store, projects: list[dict], rng: random.Random) -> None:
    """Tasks, budgets, bills, events, media and certificates for each project."""
    today = date.today()
    tasks, allocations, utilizations, bills = [], [], [], []
    events, articles, certificates = [], [], []

    for index, project in enumerate(projects, start=1):
        for n in range(3):
            status = rng.choice(TaskStatus.ALL)
            due = today + timedelta(days=rng.randint(-20, 30))
            tasks.append({
                "task_code": f"TSK-{index:03d}-{n + 1}",
                "project_id": project["id"],
                "title": rng.choice(["Site survey", "Vendor onboarding",
                                     "Beneficiary registration", "Progress review"]),
                "status": status,
                "due_date": due.isoformat(),
                "completed_date": today.isoformat() if status == TaskStatus.COMPLETED else None,
                "completion_percentage": 100 if status == TaskStatus.COMPLETED else rng.randint(0, 90),
                "priority": rng.choice(["low", "medium", "high"]),
            })

        for head in rng.sample(BUDGET_HEADS, 3):
            allocated = rng.randrange(1, 10) * 100000
            utilized = allocated * rng.randint(0, 100) / 100
            month = rng.choice(MONTHS)
            allocations.append({
                "project_id": project["id"],
                "category_id": head.lower(),
                "category_name": head,
                "allocated_amount": allocated,
                "utilized_amount": utilized,
                "pending_amount": 0,
                "available_amount": allocated - utilized,
                "fiscal_year": FISCAL_YEAR,
                "quarter": QUARTERS[month],
                "month": month,
            })

        month = rng.choice(MONTHS)
        allocated = project["total_budget"]
        utilizations.append({
            "csr_partner_id": project["csr_partner_id"],
            "project_id": project["id"],
            "fiscal_year": FISCAL_YEAR,
            "quarter": QUARTERS[month],
            "month": month,
            "allocated_amount": allocated,
            "utilized_amount": project["utilized_budget"],
            "available_amount": allocated - project["utilized_budget"],
            "utilization_percentage": project["completion_percentage"],
        })

        total = rng.randrange(5, 50) * 1000
        bill_status = rng.choice(BillStatus.ALL)
        bills.append({
            "bill_code": f"BILL-{index:03d}",
            "project_id": project["id"],
            "bill_type": "Invoice",
            "vendor_name": rng.choice(VENDORS),
            "date": (today - timedelta(days=rng.randint(0, 60))).isoformat(),
            "total_amount": total,
            "amount_paid": total if bill_status == BillStatus.PAID else 0,
            "status": bill_status,
        })

        events.append({
            "event_code": f"EVT-{index:03d}",
            "project_id": project["id"],
            "title": f"{project['name']} review",
            "event_type": rng.choice(EventType.ALL),
            "event_date": (today + timedelta(days=rng.randint(-10, 45))).isoformat(),
            "start_time": "10:00",
            "end_time": "12:00",
            "status": EventStatus.SCHEDULED,
        })

        approved = rng.random() < 0.5
        articles.append({
            "media_code": f"MED-{index:03d}",
            "project_id": project["id"],
            "title": f"Coverage: {project['name']}",
            "media_type": rng.choice([MediaType.NEWSPAPER_CUTTING, MediaType.PHOTO]),
            "category": "Press",
            "sub_category": rng.choice(NEWS_CHANNELS),
            "is_public": approved,
            "approved_by": "admin" if approved else None,
            "views_count": rng.randint(0, 500),
            "downloads_count": rng.randint(0, 50),
        })

        certificates.append({
            "certificate_code": f"UC-SEED-{index:03d}",
            "project_id": project["id"],
            "csr_partner_id": project["csr_partner_id"],
            "certificate_heading": f"Utilization certificate - {project['name']}",
            "certificate_type": "Quarterly",
            "fiscal_year": FISCAL_YEAR,
            "total_amount": project["total_budget"],
            "utilized_amount": project["utilized_budget"],
            "status": rng.choice(CertificateStatus.ALL),
            "sent_to_partner": False,
            "acknowledged": False,
        })

    store.insert("tasks", tasks)
    store.insert("budget_allocation", allocations)
    store.insert("budget_utilization", utilizations)
    store.insert("bills", bills)
    store.insert("calendar_events", events)
    store.insert("media_articles", articles)
    store.insert("utilization_certificates", certificates)


def seed_database(store=None, seed: int = 42) -> int:
    """Seed the store with fake data.

    Args:
        store: Table store to fill; defaults to the current app's store.
        seed: Random seed so repeated runs produce the same data.

    Returns:
        Number of projects created.
    """
    store = store or get_store()
    rng = random.Random(seed)
    partners = create_partners(store)
    projects = create_projects(store, partners, rng)
    create_project_records(store, projects, rng)
    return len(projects)


def main():
    """Main entry point for seed script."""
    app = create_app()

    with app.app_context():
        db.create_all()
        store = get_store()

        # Check if projects already exist
        existing_count = store.count("projects")
        if existing_count > 0:
            print(f"Database already contains {existing_count} projects.")
            print("To reseed, run: python scripts/reset_db.py")
            return

        print("Seeding database with fake CSR data...")
        count = seed_database(store)
        print(f"Created {count} projects.")

        # Print summary
        stats = count_by(store.select("projects"), "status", ProjectStatus.ALL)
        for status in ProjectStatus.ALL:
            print(f"  - {status}: {stats[status]}")
        print(f"  - Tasks: {store.count('tasks')}")
        print(f"  - Budget allocations: {store.count('budget_allocation')}")

        print("\nSeed complete!")


if __name__ == "__main__":
    main()
