"""
Love Nest - Journal URL Configuration
"""

from django.urls import path
from . import views

urlpatterns = [
    # Auth
    path('auth/sign-up/', views.sign_up_view, name='sign_up'),
    path('auth/sign-in/', views.sign_in_view, name='sign_in'),
    path('auth/sign-out/', views.sign_out_view, name='sign_out'),
    path('me/', views.me, name='me'),

    # Timeline
    path('timeline/', views.timeline, name='timeline'),
    path('timeline/miss-you/', views.miss_you, name='miss_you'),
    path('posts/<uuid:post_id>/react/', views.react, name='react'),
    path('posts/<uuid:post_id>/delete/', views.delete_post, name='delete_post'),

    # Diary, moods, memories
    path('diary/', views.diary, name='diary'),
    path('moods/', views.moods, name='moods'),
    path('memories/', views.memories, name='memories'),

    # Photos & playlist
    path('photos/', views.photos, name='photos'),
    path('photos/<uuid:photo_id>/delete/', views.delete_photo, name='delete_photo'),
    path('playlist/', views.playlist, name='playlist'),
    path('playlist/<uuid:song_id>/delete/', views.delete_song, name='delete_song'),

    # Quotes & chat
    path('quotes/', views.quotes, name='quotes'),
    path('chat/', views.chat, name='chat'),

    # Live updates
    path('watch/<str:collection>/', views.watch, name='watch'),
]
