"""
DRF views — 只负责 HTTP method 分发，逻辑全在 controllers.py。

同一个 controller 挂三个 view（见 urls.py）：
  /{resource}               GET list / POST create / PUT update
  /{resource}/{code}        GET retrieve / DELETE destroy
  /{resource}/check/{code}  GET check
其他 method 由 DRF 返回 405。
"""

from rest_framework.views import APIView


class ReferenceDataView(APIView):
    """as_view(controller=...) 注入具体 controller。"""

    controller = None


class CollectionView(ReferenceDataView):

    def get(self, request):
        return self.controller.list_records()

    def post(self, request):
        return self.controller.create(request.data)

    def put(self, request):
        return self.controller.update(request.data)


class ItemView(ReferenceDataView):

    def get(self, request, code):
        return self.controller.retrieve(code)

    def delete(self, request, code):
        return self.controller.destroy(code)


class CheckView(ReferenceDataView):

    def get(self, request, code):
        return self.controller.check(code)
