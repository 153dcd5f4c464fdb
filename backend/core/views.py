# backend/core/views.py

from django.http import HttpResponse

def home(request):
    return HttpResponse("Welcome to the investment tracker! Navigate to /admin/ or /api/investments/")
