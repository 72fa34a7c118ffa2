from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StoredDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("collection_name", models.CharField(db_index=True, max_length=100)),
                ("document_id", models.CharField(max_length=64)),
                ("data", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Stored Document",
                "verbose_name_plural": "Stored Documents",
                "db_table": "collection_forge_stored_document",
                "ordering": ["created_at", "id"],
                "unique_together": {("collection_name", "document_id")},
            },
        ),
    ]
