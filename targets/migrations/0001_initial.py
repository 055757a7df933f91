from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("courses", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Target",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("role", models.CharField(choices=[("team", "Team"), ("individual", "Individual")], default="team", max_length=16)),
                ("target_type", models.CharField(blank=True, max_length=50)),
                ("resubmittable", models.BooleanField(default=True)),
                ("days_to_complete", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("session_at", models.DateTimeField(blank=True, null=True)),
                ("link_to_complete", models.URLField(blank=True)),
                ("points_earnable", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="targets", to="courses.course")),
                ("evaluation_criteria", models.ManyToManyField(blank=True, related_name="targets", to="courses.evaluationcriterion")),
                ("prerequisite_targets", models.ManyToManyField(blank=True, related_name="dependent_targets", to="targets.target")),
            ],
            options={
                "ordering": ["course_id", "id"],
            },
        ),
        migrations.CreateModel(
            name="Quiz",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("target", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="quiz", to="targets.target")),
            ],
            options={
                "verbose_name_plural": "quizzes",
            },
        ),
        migrations.CreateModel(
            name="QuizQuestion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order", models.PositiveSmallIntegerField(default=0)),
                ("question", models.TextField()),
                ("description", models.TextField(blank=True)),
                ("quiz", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="questions", to="targets.quiz")),
            ],
            options={
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="AnswerOption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("value", models.CharField(max_length=500)),
                ("hint", models.TextField(blank=True)),
                ("quiz_question", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="answer_options", to="targets.quizquestion")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddField(
            model_name="quizquestion",
            name="correct_answer",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="targets.answeroption"),
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("group_key", models.CharField(db_index=True, max_length=64)),
                ("description", models.TextField()),
                ("links", models.JSONField(blank=True, default=list)),
                ("iteration", models.PositiveSmallIntegerField(default=1)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("evaluated_at", models.DateTimeField(blank=True, null=True)),
                ("passed_at", models.DateTimeField(blank=True, null=True)),
                ("latest", models.BooleanField(default=False)),
                ("quiz_score", models.CharField(blank=True, max_length=16)),
                ("auto_verified", models.BooleanField(default=False)),
                ("evaluator", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="evaluated_submissions", to=settings.AUTH_USER_MODEL)),
                ("founder", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to="courses.founder")),
                ("target", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to="targets.target")),
                ("team", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to="courses.team")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("latest", True)), fields=("target", "group_key"), name="one_latest_submission_per_group"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SubmissionFile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file", models.FileField(upload_to="submission_files/")),
                ("title", models.CharField(blank=True, max_length=200)),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="files", to="targets.submission")),
            ],
        ),
        migrations.CreateModel(
            name="SubmissionGrade",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("grade", models.PositiveSmallIntegerField()),
                ("evaluation_criterion", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="grades", to="courses.evaluationcriterion")),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="grades", to="targets.submission")),
            ],
            options={
                "unique_together": {("submission", "evaluation_criterion")},
            },
        ),
        migrations.CreateModel(
            name="SubmissionFeedback",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("feedback", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("coach", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="submission_feedback", to=settings.AUTH_USER_MODEL)),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="feedback", to="targets.submission")),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="QuizAnswer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("answer_option", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="targets.answeroption")),
                ("quiz_question", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="targets.quizquestion")),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="quiz_answers", to="targets.submission")),
            ],
            options={
                "unique_together": {("submission", "quiz_question")},
            },
        ),
    ]
