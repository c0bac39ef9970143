from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from buildops.core.exceptions import AIServiceError, error_response
from .flows import suggest_iso_compliance
from .serializers import ISOComplianceRequestSerializer


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def iso_compliance(request):
    """Suggest ISO 9001 improvements for a described set of ERP operations"""
    serializer = ISOComplianceRequestSerializer(data=request.data)
    if not serializer.is_valid():
        message = serializer.errors.get('erpDescription', ['Invalid input.'])[0]
        return Response({'message': str(message), 'data': None, 'error': True}, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = suggest_iso_compliance(serializer.validated_data['erpDescription'])
    except AIServiceError as e:
        return error_response(e)

    if not result['suggestions']:
        return Response({
            'message': 'No suggestions could be generated for this description.',
            'data': None,
            'error': True,
        })
    return Response({'message': 'Suggestions generated successfully.', 'data': result, 'error': False})
