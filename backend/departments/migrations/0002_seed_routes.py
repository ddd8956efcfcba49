from django.db import migrations

DEPARTMENTS = [
    ("Public Works", "Handles infrastructure issues", "publicworks@city.gov"),
    ("Traffic Management", "Manages traffic signals and road safety", "traffic@city.gov"),
    ("Utilities", "Water, sewer, and electrical issues", "utilities@city.gov"),
]

ROUTES = [
    ("Pothole", "Public Works"),
    ("Streetlight", "Public Works"),
    ("Bridges", "Public Works"),
    ("Traffic Signal", "Traffic Management"),
    ("Water Disposal", "Utilities"),
    ("Sewer Lids", "Utilities"),
]


def seed(apps, schema_editor):
    Department = apps.get_model("departments", "Department")
    ProblemTypeRoute = apps.get_model("departments", "ProblemTypeRoute")

    by_name = {}
    for name, description, email in DEPARTMENTS:
        by_name[name], _ = Department.objects.get_or_create(
            name=name,
            defaults={"description": description, "email": email},
        )
    for problem_type, department_name in ROUTES:
        ProblemTypeRoute.objects.get_or_create(
            problem_type=problem_type,
            defaults={"department": by_name[department_name]},
        )


def unseed(apps, schema_editor):
    ProblemTypeRoute = apps.get_model("departments", "ProblemTypeRoute")
    Department = apps.get_model("departments", "Department")
    ProblemTypeRoute.objects.filter(problem_type__in=[p for p, _ in ROUTES]).delete()
    Department.objects.filter(name__in=[d[0] for d in DEPARTMENTS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("departments", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed, unseed),
    ]
