from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Department",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="Name")),
                ("description", models.CharField(blank=True, default="", max_length=500, verbose_name="Description")),
                ("email", models.EmailField(max_length=50, verbose_name="Contact Email")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Department",
                "verbose_name_plural": "Departments",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ProblemTypeRoute",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("problem_type", models.CharField(max_length=50, unique=True, verbose_name="Problem Type")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="routes",
                        to="departments.department",
                        verbose_name="Department",
                    ),
                ),
            ],
            options={
                "verbose_name": "Problem Type Route",
                "verbose_name_plural": "Problem Type Routes",
                "ordering": ["problem_type"],
            },
        ),
    ]
