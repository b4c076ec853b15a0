from django.urls import path

from .controllers import CONTROLLERS
from .views import CheckView, CollectionView, ItemView


def resource_urls(controller):
    resource = controller.resource
    code = f'<{controller.code_converter}:code>'
    return [
        path(f'{resource}', CollectionView.as_view(controller=controller), name=f'{resource}-list'),
        path(f'{resource}/check/{code}', CheckView.as_view(controller=controller), name=f'{resource}-check'),
        path(f'{resource}/{code}', ItemView.as_view(controller=controller), name=f'{resource}-detail'),
    ]


urlpatterns = [
    url
    for controller in CONTROLLERS
    for url in resource_urls(controller)
]
