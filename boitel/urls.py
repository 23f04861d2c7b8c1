"""
URL configuration for the boitel project.

Only the admin site is routed: the rate card is maintained there and the
calculation engine is consumed as a Python API.
"""
from django.contrib import admin
from django.urls import path

admin.site.site_header = "Administração Boitel"
admin.site.site_title = "Administração Boitel"
admin.site.index_title = "Matriz de preços e cadastros"

urlpatterns = [
    path('admin/', admin.site.urls),
]
