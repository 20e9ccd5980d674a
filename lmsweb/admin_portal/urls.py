from django.urls import path
from . import views

urlpatterns = [
    path('lms/certificate-templates/', views.certificate_template_list, name='certificate_template_list'),
    path('lms/certificate-templates/new/', views.certificate_template_create, name='certificate_template_create'),
    path('lms/certificate-templates/<int:pk>/', views.certificate_template_edit, name='certificate_template_edit'),
    path('lms/certificate-templates/<int:pk>/set-default/', views.certificate_template_set_default, name='certificate_template_set_default'),
    path('lms/certificate-templates/<int:pk>/delete/', views.certificate_template_delete, name='certificate_template_delete'),
    path('admin-portal/users/', views.admin_two_factor_accounts, name='admin_two_factor_accounts'),
    path('admin-portal/users/<int:pk>/disable-2fa/', views.admin_disable_two_factor, name='admin_disable_two_factor'),
]
