"""
URL configuration for department_admin project.
"""

from django.conf import settings
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include('django.contrib.auth.urls')),

    # App URLs
    path('', RedirectView.as_view(pattern_name='departments:department_list', permanent=False)),
    path('departments/', include('apps.departments.urls', namespace='departments')),
]

# Debug toolbar
if 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns

# Admin site customization
admin.site.site_header = 'Department Admin Administration'
admin.site.site_title = 'Department Admin'
admin.site.index_title = 'Welcome to Department Admin'
