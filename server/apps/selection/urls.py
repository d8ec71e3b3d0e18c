"""URL routes for the selection API."""

from django.urls import path

from server.apps.selection import views

app_name = 'selection'

urlpatterns = [
    path('files', views.load_directory, name='load-directory'),
    path('files/current', views.current_state, name='current'),
    path('files/select', views.select_entry, name='select'),
    path('files/deselect', views.deselect_entry, name='deselect'),
    path('files/select-all', views.select_all, name='select-all'),
    path('files/deselect-all', views.deselect_all, name='deselect-all'),
    path('files/copy', views.copy_selection, name='copy'),
    path('files/move', views.move_selection, name='move'),
    path('files/delete', views.delete_selection, name='delete'),
]
