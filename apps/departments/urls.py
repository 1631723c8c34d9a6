"""
URL configuration for departments app.

All views are staff-only.
"""

from django.urls import path
from . import views

app_name = 'departments'

urlpatterns = [
    path('', views.department_list_view, name='department_list'),
    path('table/', views.department_table_view, name='department_table'),
    path('create/', views.department_create_view, name='department_create'),
    path('create/dismiss/', views.department_create_dismiss_view, name='department_create_dismiss'),
    path('edit/dismiss/', views.department_edit_dismiss_view, name='department_edit_dismiss'),
    path('draft/<str:kind>/field/', views.department_field_view, name='department_field'),
    path('<str:pk>/edit/', views.department_edit_view, name='department_edit'),
    path('<str:pk>/delete/', views.department_delete_view, name='department_delete'),
]
