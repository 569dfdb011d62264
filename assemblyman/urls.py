from django.urls import path

from assemblyman.views import (
    assembly_picklist,
    assembly_usage,
    bom_sourcing,
    create_assembly,
    item_vendors,
    reverse_assembly,
    unit_serials,
)

app_name = 'assemblyman'

urlpatterns = [
    # Assembly runs
    path('assemblies/create/', create_assembly, name='assembly-create'),
    path('assemblies/reverse/', reverse_assembly, name='assembly-reverse'),
    path('units/<int:pk>/serials/', unit_serials, name='unit-serials'),

    # Vendor availability
    path('items/<str:code>/vendors/', item_vendors, name='item-vendors'),
    path('boms/<int:pk>/sourcing/', bom_sourcing, name='bom-sourcing'),

    # Reports
    path('assemblies/<int:pk>/picklist/', assembly_picklist, name='assembly-picklist'),
    path('assemblies/<int:pk>/usage/', assembly_usage, name='assembly-usage'),
]
