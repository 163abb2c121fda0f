# Generated manually for marketplace app

import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Marketplace',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('slug', models.SlugField(max_length=220, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('members', models.ManyToManyField(blank=True, related_name='member_marketplaces', to=settings.AUTH_USER_MODEL)),
                ('owners', models.ManyToManyField(blank=True, related_name='owned_marketplaces', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('created_by', models.CharField(blank=True, help_text='Attribution supplied by the client', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('images', models.JSONField(blank=True, default=list, help_text='Ordered image URLs')),
                ('stripe_product_id', models.CharField(blank=True, max_length=255, null=True)),
                ('needs_sync', models.BooleanField(default=False, help_text='Local changes not yet reflected remotely')),
                ('total_quantity', models.PositiveIntegerField(default=0, help_text="Sum of the prices' allocated quantities")),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ProductTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_tags', to='marketplace.product')),
                ('tag', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_tags', to='marketplace.tag')),
            ],
        ),
        migrations.AddField(
            model_name='product',
            name='tags',
            field=models.ManyToManyField(related_name='products', through='marketplace.ProductTag', to='marketplace.tag'),
        ),
        migrations.CreateModel(
            name='Price',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('unit_amount', models.PositiveIntegerField(help_text='Minor currency units', validators=[django.core.validators.MinValueValidator(1)])),
                ('currency', models.CharField(default='usd', max_length=3)),
                ('is_default', models.BooleanField(default=False)),
                ('payment_style', models.CharField(choices=[('INSTANT', 'Instant'), ('REQUEST', 'Request')], default='INSTANT', max_length=10)),
                ('allocated_quantity', models.PositiveIntegerField(default=0)),
                ('stripe_price_id', models.CharField(default='placeholder', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('marketplace', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='prices', to='marketplace.marketplace')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='prices', to='marketplace.product')),
            ],
            options={
                'ordering': ['-is_default', 'created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='product',
            index=models.Index(fields=['seller', '-created_at'], name='marketplace_seller__5a1c2e_idx'),
        ),
        migrations.AddIndex(
            model_name='product',
            index=models.Index(fields=['needs_sync'], name='marketplace_needs_s_8d03b1_idx'),
        ),
        migrations.AddIndex(
            model_name='price',
            index=models.Index(fields=['product', '-created_at'], name='marketplace_product_3f9e7a_idx'),
        ),
        migrations.AddIndex(
            model_name='price',
            index=models.Index(fields=['marketplace', 'product'], name='marketplace_marketp_b27c40_idx'),
        ),
        migrations.AddConstraint(
            model_name='producttag',
            constraint=models.UniqueConstraint(fields=('product', 'tag'), name='unique_product_tag'),
        ),
    ]
