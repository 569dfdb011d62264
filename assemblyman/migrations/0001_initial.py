"""
Initial migration for Assemblyman models.
"""

from decimal import Decimal
import django.core.validators
import django.core.serializers.json
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Assemblyman models: catalog, ledger, assembly runs, activity log."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Vendor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.SlugField(help_text='Unique identifier (e.g. acme, globex)', unique=True, verbose_name='Code')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('legal_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Legal name')),
                ('email', models.EmailField(blank=True, default='', max_length=254, verbose_name='Email')),
                ('phone', models.CharField(blank=True, default='', max_length=50, verbose_name='Phone')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Vendor',
                'verbose_name_plural': 'Vendors',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50, unique=True, verbose_name='Item ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('display_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Display name')),
                ('unit', models.CharField(default='pcs', max_length=20, verbose_name='Unit')),
                ('group', models.CharField(blank=True, default='', max_length=100, verbose_name='Group')),
                ('item_class', models.CharField(blank=True, default='', max_length=100, verbose_name='Class')),
                ('stock_min', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Minimum stock')),
                ('stock_max', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Maximum stock')),
                ('stock_reorder', models.DecimalField(decimal_places=3, default=Decimal('0'), help_text='0 = no reorder alert', max_digits=12, verbose_name='Reorder level')),
                ('is_serial_tracked', models.BooleanField(default=False, help_text='Units fitted with this item record one serial per piece.', verbose_name='Serial tracked')),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Items',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Lot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('batch', models.CharField(blank=True, default='', max_length=50, verbose_name='Source purchase')),
                ('_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantity')),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lots', to='assemblyman.item', verbose_name='Item')),
                ('vendor', models.ForeignKey(blank=True, help_text='Empty = internal source', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='lots', to='assemblyman.vendor', verbose_name='Vendor')),
            ],
            options={
                'verbose_name': 'Lot',
                'verbose_name_plural': 'Lots',
                'indexes': [models.Index(fields=['item', 'vendor'], name='asm_lot_item_vendor_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('item', 'vendor', 'batch'), name='unique_lot_coordinate'),
                    models.CheckConstraint(condition=models.Q(('_quantity__gte', 0)), name='lot_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Move',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('delta', models.DecimalField(decimal_places=3, help_text='Positive = in, Negative = out', max_digits=12, verbose_name='Delta')),
                ('reference_id', models.PositiveIntegerField(blank=True, null=True, verbose_name='Reference ID')),
                ('reason', models.CharField(help_text='Required. E.g. "Assembly #12", "Purchase PO-881"', max_length=255, verbose_name='Reason')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Timestamp')),
                ('lot', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='moves', to='assemblyman.lot', verbose_name='Lot')),
                ('reference_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='contenttypes.contenttype', verbose_name='Reference type')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Move',
                'verbose_name_plural': 'Moves',
                'ordering': ['timestamp'],
                'indexes': [
                    models.Index(fields=['lot', 'timestamp'], name='asm_move_lot_timestamp_idx'),
                    models.Index(fields=['reference_type', 'reference_id'], name='asm_move_reference_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BOM',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='boms', to='assemblyman.item', verbose_name='Assembled item')),
            ],
            options={
                'verbose_name': 'Bill of materials',
                'verbose_name_plural': 'Bills of materials',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='BOMLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.001'))], verbose_name='Quantity per unit')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('bom', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='assemblyman.bom', verbose_name='Bill of materials')),
                ('component', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='used_in', to='assemblyman.item', verbose_name='Component')),
            ],
            options={
                'verbose_name': 'BOM line',
                'verbose_name_plural': 'BOM lines',
                'ordering': ['pk'],
                'constraints': [
                    models.UniqueConstraint(fields=('bom', 'component'), name='unique_bom_component'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Assembly',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('quantity', models.PositiveIntegerField(verbose_name='Units')),
                ('po_number', models.CharField(blank=True, default='', help_text='Optional purchase order this run fulfills', max_length=50, verbose_name='Purchase order')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('bom', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='assemblies', to='assemblyman.bom', verbose_name='Bill of materials')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='assemblies', to='assemblyman.item', verbose_name='Assembled item')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
            ],
            options={
                'verbose_name': 'Assembly',
                'verbose_name_plural': 'Assemblies',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='AssemblyUnit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('unit_number', models.PositiveIntegerField(verbose_name='Unit number')),
                ('serial_number', models.CharField(blank=True, default='', max_length=100, verbose_name='Serial number')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assembly', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='units', to='assemblyman.assembly', verbose_name='Assembly')),
            ],
            options={
                'verbose_name': 'Assembly unit',
                'verbose_name_plural': 'Assembly units',
                'ordering': ['assembly', 'unit_number'],
                'constraints': [
                    models.UniqueConstraint(fields=('assembly', 'unit_number'), name='unique_assembly_unit_number'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ComponentUsage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity used')),
                ('assembly', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='usages', to='assemblyman.assembly', verbose_name='Assembly')),
                ('component', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='assemblyman.item', verbose_name='Component')),
                ('lot', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='usages', to='assemblyman.lot', verbose_name='Source lot')),
            ],
            options={
                'verbose_name': 'Component usage',
                'verbose_name_plural': 'Component usages',
                'ordering': ['assembly', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='UnitComponentSerial',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('serial_number', models.CharField(max_length=100, verbose_name='Serial number')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('component', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='assemblyman.item', verbose_name='Component')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='component_serials', to='assemblyman.assemblyunit', verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Component serial',
                'verbose_name_plural': 'Component serials',
                'ordering': ['unit', 'component', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='ActivityLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('CREATE_ASSEMBLY', 'Assembly created'), ('DELETE_ASSEMBLY', 'Assembly deleted'), ('UPDATE_SERIALS', 'Unit serials updated')], db_index=True, max_length=40, verbose_name='Action')),
                ('details', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder, verbose_name='Details')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activity log',
                'ordering': ['-created_at'],
            },
        ),
    ]
