"""
Love Nest - Forms
"""

from django import forms

from .exceptions import ValidationError
from .models import Profile


class SignUpForm(forms.Form):
    email = forms.EmailField(max_length=150)
    password = forms.CharField(strip=False)
    name = forms.CharField(max_length=50)


class SignInForm(forms.Form):
    email = forms.CharField(max_length=150)
    password = forms.CharField(strip=False)


class ProfileForm(forms.ModelForm):
    """Form for editing the display name and photo."""

    class Meta:
        model = Profile
        fields = ['name', 'avatar']
        labels = {
            'name': 'Display Name',
            'avatar': 'Profile Photo',
        }


class DiaryForm(forms.Form):
    """Parses the date; content and mood are checked by the gateway."""
    date = forms.DateField(required=False)
    content = forms.CharField(required=False, strip=False)
    mood = forms.CharField(required=False)


def require_valid(form):
    """Return cleaned_data, or raise ValidationError carrying the form errors."""
    if not form.is_valid():
        raise ValidationError(
            'Please fix the highlighted fields.',
            fields={name: [str(e) for e in errors] for name, errors in form.errors.items()},
        )
    return form.cleaned_data
