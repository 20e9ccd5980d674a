from django.urls import path

from . import views

urlpatterns = [
    path('verify/<str:verification_hash>/', views.verify_certificate_view, name='verify_certificate'),
    path('certificates/', views.my_certificates, name='my_certificates'),
    path('certificates/<int:pk>/', views.certificate_detail, name='certificate_detail'),
    path('courses/<slug:slug>/certificate/', views.request_certificate, name='request_certificate'),
]
