from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("ends_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["title"],
            },
        ),
        migrations.CreateModel(
            name="Team",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("access_ends_at", models.DateTimeField(blank=True, null=True)),
                ("iteration", models.PositiveSmallIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="teams", to="courses.course")),
            ],
            options={
                "ordering": ["course_id", "name"],
            },
        ),
        migrations.CreateModel(
            name="EvaluationCriterion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("max_grade", models.PositiveSmallIntegerField(default=3)),
                ("pass_grade", models.PositiveSmallIntegerField(default=2)),
                ("grade_labels", models.JSONField(blank=True, default=dict)),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="evaluation_criteria", to="courses.course")),
            ],
            options={
                "ordering": ["course_id", "name"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("pass_grade__lte", models.F("max_grade"))), name="criterion_pass_grade_within_max"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Founder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("team", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="founders", to="courses.team")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="founders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["team_id", "user_id"],
                "unique_together": {("user", "team")},
            },
        ),
        migrations.CreateModel(
            name="CoachEnrolment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("coach", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="coach_enrolments", to=settings.AUTH_USER_MODEL)),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="coach_enrolments", to="courses.course")),
                ("team", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="coach_enrolments", to="courses.team")),
            ],
            options={
                "unique_together": {("coach", "course", "team")},
            },
        ),
    ]
